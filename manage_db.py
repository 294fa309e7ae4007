#!/usr/bin/env python3
"""
Database management script for the time sheet approvals backend.
Handles table setup, role grants and one-off auto-approval sweeps.
"""

import sys
import asyncio
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from timesheets.config import get_settings
from timesheets.domain.services.capabilities import ProjectRole
from timesheets.infrastructure.db.database import get_engine, get_session_factory, create_tables, drop_tables
from timesheets.infrastructure.auth.capability_resolver import SQLAlchemyCapabilityResolver
from timesheets.infrastructure.events.event_setup import initialize_event_system
from timesheets.infrastructure.web.dependencies import build_workflow_context
from timesheets.application.use_cases.auto_approval_use_cases import RunAutoApprovalSweepUseCase


def create_all():
    """Create all tables that do not exist yet."""
    print("Creating tables...")
    create_tables(get_engine())


def reset_database():
    """Reset database - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        print("Resetting database...")
        drop_tables(get_engine())
        create_tables(get_engine())
    else:
        print("Database reset cancelled.")


def grant_role(project_id: str, user_id: str, role: str):
    """Give a user a role on a project."""
    resolver = SQLAlchemyCapabilityResolver(get_session_factory())
    resolver.assign_role(project_id, user_id, ProjectRole(role))
    print(f"Granted {role} on {project_id} to {user_id}")


def revoke_role(project_id: str, user_id: str, role: str):
    """Take a role away from a user."""
    resolver = SQLAlchemyCapabilityResolver(get_session_factory())
    if resolver.revoke_role(project_id, user_id, ProjectRole(role)):
        print(f"Revoked {role} on {project_id} from {user_id}")
    else:
        print(f"{user_id} does not hold {role} on {project_id}")


def run_sweep(project_id: str = None):
    """Run one auto-approval pass."""
    initialize_event_system()
    context = build_workflow_context(get_session_factory(), get_settings().system_actor_id)
    report = asyncio.run(RunAutoApprovalSweepUseCase(context).run(project_id))
    print(
        f"Entries approved: {report.entries_approved}, sheets approved: {report.sheets_approved}, "
        f"stages recorded: {report.stages_recorded}"
    )
    for failure in report.failures:
        print(f"  {failure.record_type} {failure.record_id}: {failure.error_code} {failure.message}")


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create                         - Create all tables")
        print("  reset                          - Reset database (WARNING: drops all data)")
        print("  grant <project> <user> <role>  - Grant a project role")
        print("  revoke <project> <user> <role> - Revoke a project role")
        print("  sweep [project]                - Run the auto-approval sweep once")
        print(f"Roles: {', '.join(role.value for role in ProjectRole)}")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        create_all()
    elif command_name == "reset":
        reset_database()
    elif command_name in ("grant", "revoke"):
        if len(sys.argv) != 5:
            print(f"Usage: python manage_db.py {command_name} <project> <user> <role>")
            return
        action = grant_role if command_name == "grant" else revoke_role
        action(*sys.argv[2:5])
    elif command_name == "sweep":
        run_sweep(sys.argv[2] if len(sys.argv) > 2 else None)
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
