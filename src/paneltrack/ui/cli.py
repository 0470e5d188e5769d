# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from dotenv import load_dotenv

from paneltrack.app import (
    allowed_statuses,
    change_panel_status,
    create_building,
    create_project,
    import_items,
    import_panels,
    panel_history,
)
from paneltrack.config import (
    ConfigurationError,
    ImportConfig,
    configure_logging,
    get_acting_user,
    get_import_config,
)
from paneltrack.domain.lifecycle import (
    InvalidTransition,
    LifecycleError,
    lookup_status,
    status_info,
)
from paneltrack.domain.model import PanelStatus, UserRole
from paneltrack.domain.reconciliation import MatchScope

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from paneltrack.domain.model import Panel
    from paneltrack.domain.reconciliation import ReconciliationReport

log = logging.getLogger(__name__)


def _status_arg(value: str) -> PanelStatus:
    status = lookup_status(value)
    if status is None:
        choices = ", ".join(member.value for member in PanelStatus)
        raise argparse.ArgumentTypeError(f"unknown status {value!r} (choose from {choices})")
    return status


def _uuid_arg(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid UUID: {value}") from exc


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track precast panels and reconcile registers")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    project = subparsers.add_parser("project", help="Project management commands")
    project_sub = project.add_subparsers(dest="project_command", required=True)
    project_create = project_sub.add_parser("create", help="Create a project")
    project_create.add_argument("--name", type=str, required=True, help="Project name")
    project_create.add_argument("--location", type=str, help="Optional site location")
    project_create.add_argument("--client", type=str, help="Optional client name")

    building = subparsers.add_parser("building", help="Building management commands")
    building_sub = building.add_subparsers(dest="building_command", required=True)
    building_create = building_sub.add_parser("create", help="Create a building in a project")
    building_create.add_argument("--project-id", type=_uuid_arg, required=True)
    building_create.add_argument("--name", type=str, required=True, help="Building name")
    building_create.add_argument(
        "--floors",
        type=int,
        default=1,
        help="Number of floors (default: %(default)s)",
    )
    building_create.add_argument("--description", type=str, help="Optional description")

    panels = subparsers.add_parser("import-panels", help="Reconcile a CSV/XLSX panel register")
    panels.add_argument("file", type=Path, help="Spreadsheet to import")
    panels.add_argument("--project-id", type=_uuid_arg, help="Project for rows without one")
    panels.add_argument("--building-id", type=_uuid_arg, help="Building for new panels")
    panels.add_argument(
        "--workers",
        type=int,
        help="Threads used to classify rows (defaults to config)",
    )
    panels.add_argument(
        "--match-scope",
        type=MatchScope,
        choices=list(MatchScope),
        help="Match serial numbers across all panels or within the project (defaults to config)",
    )

    items = subparsers.add_parser("import-items", help="Import a CSV/XLSX item register")
    items.add_argument("file", type=Path, help="Spreadsheet to import")
    items.add_argument("--project-id", type=_uuid_arg, help="Project for rows without one")

    set_status = subparsers.add_parser("set-status", help="Move a panel to a new status")
    set_status.add_argument("panel", type=str, help="Panel id or serial number")
    set_status.add_argument("status", type=_status_arg, help="Requested status")
    _add_role_argument(set_status)
    set_status.add_argument("--user", type=str, help="Acting user label (or PANELTRACK_USER)")
    set_status.add_argument("--notes", type=str, help="Optional note stored with the change")
    set_status.add_argument("--project-id", type=_uuid_arg, help="Disambiguate a serial number")

    history = subparsers.add_parser("history", help="Show a panel's status history")
    history.add_argument("panel", type=str, help="Panel id or serial number")
    history.add_argument("--project-id", type=_uuid_arg, help="Disambiguate a serial number")

    allowed = subparsers.add_parser("allowed", help="List statuses a role may set next")
    allowed.add_argument("panel", type=str, help="Panel id or serial number")
    _add_role_argument(allowed)
    allowed.add_argument("--project-id", type=_uuid_arg, help="Disambiguate a serial number")

    return parser.parse_args(list(argv))


def _add_role_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--role",
        type=UserRole,
        choices=list(UserRole),
        required=True,
        help="Acting role",
    )


def _import_config(args: argparse.Namespace) -> ImportConfig:
    base = get_import_config()
    workers = base.workers if args.workers is None else args.workers
    if workers < 1:
        raise ValueError("--workers must be at least 1")
    return ImportConfig(workers=workers, match_scope=args.match_scope or base.match_scope)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _panel_summary(panel: Panel) -> dict[str, Any]:
    return {
        "id": str(panel.id),
        "serial_number": panel.serial_number,
        "status": panel.status.value,
        "status_label": status_info(panel.status).label,
        "manufactured_date": panel.manufactured_date,
        "delivered_date": panel.delivered_date,
        "installed_date": panel.installed_date,
        "inspected_date": panel.inspected_date,
    }


def _finish_report(report: ReconciliationReport) -> None:
    _print_json(report.to_dict())
    if not report.ok:
        sys.exit(1)


def _run(args: argparse.Namespace) -> None:
    if args.command == "project" and args.project_command == "create":
        project = create_project(args.name, location=args.location, client_name=args.client)
        _print_json({"id": str(project.id), "name": project.name})
    elif args.command == "building" and args.building_command == "create":
        building = create_building(
            args.project_id,
            args.name,
            floors=args.floors,
            description=args.description,
        )
        _print_json({"id": str(building.id), "name": building.name})
    elif args.command == "import-panels":
        _finish_report(
            import_panels(
                args.file,
                project_id=args.project_id,
                building_id=args.building_id,
                config=_import_config(args),
            )
        )
    elif args.command == "import-items":
        _finish_report(import_items(args.file, project_id=args.project_id))
    elif args.command == "set-status":
        outcome = change_panel_status(
            args.panel,
            args.status,
            args.role,
            acting_user=get_acting_user(args.user),
            notes=args.notes,
            project_id=args.project_id,
        )
        _print_json(_panel_summary(outcome.panel))
    elif args.command == "history":
        panel, entries = panel_history(args.panel, project_id=args.project_id)
        _print_json(
            {
                "panel": _panel_summary(panel),
                "history": [
                    {
                        "status": entry.status.value,
                        "date": entry.changed_at.isoformat(),
                        "updated_by": entry.updated_by,
                        "notes": entry.notes,
                    }
                    for entry in entries
                ],
            }
        )
    elif args.command == "allowed":
        panel, statuses = allowed_statuses(args.panel, args.role, project_id=args.project_id)
        _print_json(
            {
                "panel": _panel_summary(panel),
                "role": args.role.display_name,
                "allowed": sorted(status.value for status in statuses),
            }
        )
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO, force=True)

    try:
        _run(parsed_args)
    except LifecycleError as exc:
        log.error("Transition rejected: %s", exc)  # noqa: TRY400
        allowed = sorted(exc.allowed) if isinstance(exc, InvalidTransition) else []
        _print_json({"error": type(exc).__name__, "message": str(exc), "allowed": allowed})
        sys.exit(2)
    except (ValueError, LookupError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point: load ``.env`` and install the Ctrl+C handler first."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
