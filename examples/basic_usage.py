#!/usr/bin/env python3
"""
Basic forgepolicy usage example.

This example walks through a project's life: creation, visibility checks,
group permissions and an ownership transfer.
Run with: python examples/basic_usage.py
"""

import logging

from forgepolicy import (
    ConfigurationError,
    ForgePolicyError,
    ForgeSettings,
    InMemoryStore,
    RequestContext,
    ValidationError,
    add_repository,
    can_view,
    configure_logging,
    create_project,
    is_collaborator,
    is_committer,
)
from forgepolicy.types import (
    ANONYMOUS,
    Group,
    GroupOwner,
    IndividualOwner,
    RepositoryKind,
    Role,
    User,
    Visibility,
)

configure_logging(level=logging.INFO)

print("=== forgepolicy Basic Usage Example ===\n")

# 1. Exception hierarchy
print("1. Testing exception classes...")
try:
    raise ConfigurationError("Missing FORGEPOLICY_GIT_HOST")
except ForgePolicyError as e:
    print(f"   Caught ForgePolicyError: {e}")
    print(f"   Code: {e.code}, Message: {e.message}")

print("\n   OK: Exception classes working\n")

# 2. Create a private project
print("2. Creating a private project...")
store = InMemoryStore()
settings = ForgeSettings(default_visibility=Visibility.COLLABORATORS)
johan = User(user_id="1", login="johan")
mike = User(user_id="2", login="mike")

project = create_project(
    store,
    creator=johan,
    owner=IndividualOwner(johan),
    slug="Gitorious",
    title="Gitorious",
    description="Open source code hosting",
    home_url="gitorious.org",
    settings=settings,
)
mainline = add_repository(store, project, "mainline", RepositoryKind.MAINLINE, project.owner, johan)
print(f"   Slug: {project.slug}, home: {project.home_url}")
print(f"   Repositories: {[r.name for r in project.repositories]}")

try:
    create_project(
        store, creator=mike, owner=IndividualOwner(mike),
        slug="admin", title="", description="x",
    )
except ValidationError as e:
    print(f"   Rejected: {e.errors}")

print("\n   OK: Project lifecycle working\n")

# 3. Visibility
print("3. Checking visibility...")
print(f"   johan can view: {can_view(johan, project)}")
print(f"   mike can view: {can_view(mike, project)}")
print(f"   anonymous can view: {can_view(ANONYMOUS, project)}")

print("\n   OK: Visibility working\n")

# 4. Ownership transfer to a group
print("4. Transferring to a group...")
core = Group(name="core")
core.add_member(mike, Role.ADMIN)
core.add_member(User(user_id="3", login="marius"), Role.MEMBER)
store.save_group(core)

with RequestContext(johan, store, settings) as context:
    changed = context.change_owner(project, GroupOwner(core))

print(f"   Changed: {changed}")
print(f"   mike is committer: {is_committer(mike, project)}")
print(f"   johan is collaborator: {is_collaborator(johan, project)}")
print(f"   johan's grant: {sorted(p.value for p in mainline.committerships[0].permissions)}")

# A second transfer of the now group-owned project is ignored
print(f"   Changed again: {context.change_owner(project, IndividualOwner(johan))}")

print("\n   OK: Ownership transfer working\n")

print("=== All examples completed ===")
