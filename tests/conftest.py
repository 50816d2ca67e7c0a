pytest_plugins = ["forgepolicy.testing.conftest"]
