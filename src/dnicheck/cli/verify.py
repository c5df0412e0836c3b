"""
CLI commands for verifying an ID number.

Commands:
    dnicheck verify --dni <n> --given-name <g> --surname <s> [--digit <d>]
    dnicheck lookup --dni <n>
    dnicheck providers
"""

from __future__ import annotations

import asyncio
import json

from rich.table import Table

from dnicheck.cli import ux
from dnicheck.client.disclosure import DisclosureController
from dnicheck.client.http import VerificationClient
from dnicheck.config import Settings, get_settings
from dnicheck.core.errors import ExitCode, ValidationError, main_with_error_handling
from dnicheck.directory.models import Matched
from dnicheck.identity.matcher import ReportVariant, VerificationReport, build_report
from dnicheck.identity.models import AssertedIdentity, IdentityQuery, is_valid_id_number
from dnicheck.providers import list_providers
from dnicheck.service import VerificationOutcome, build_verification_service

VARIANT_STYLES = {
    ReportVariant.SUCCESS: "green",
    ReportVariant.WARNING: "yellow",
    ReportVariant.DANGER: "red",
}

SHOW, HIDE, COPY, CLOSE = "Show", "Hide", "Copy", "Close"


async def fetch_outcome(dni: str, settings: Settings, *, local: bool) -> VerificationOutcome:
    """Run the server side in-process, or ask the API."""
    if local:
        service = build_verification_service(settings)
        return await service.validate(IdentityQuery(dni=dni))
    client = VerificationClient(
        settings.api_base_url,
        api_prefix=settings.api_prefix,
        timeout=settings.http_timeout,
    )
    return await client.validate(dni)


def render_report(report: VerificationReport) -> None:
    lines = [
        report.message,
        "",
        f"[muted]Source:[/muted] {report.source_label}",
        f"[muted]Directory:[/muted] {report.directory_label}",
    ]
    if report.directory_hint:
        lines.append(f"[muted]{report.directory_hint}[/muted]")
    ux.panel("\n".join(lines), report.title, VARIANT_STYLES[report.variant])


def run_disclosure(controller: DisclosureController) -> None:
    """Interactive loop over the confirmation surface."""
    if not ux.confirm("Request password?", default=False):
        return

    controller.request_disclosure()
    ux.info("For security, the password is masked by default.")

    while controller.surface_open:
        toggle = HIDE if controller.revealed else SHOW
        choice = ux.select(f"Password: {controller.display}", [toggle, COPY, CLOSE], CLOSE)
        if choice in (SHOW, HIDE):
            controller.toggle_reveal()
        elif choice == COPY:
            notice = controller.copy_to_clipboard()
            if notice is not None:
                (ux.success if notice.success else ux.error)(notice.message)
        else:
            controller.close()


@main_with_error_handling()
def verify_command(
    dni: str | None,
    given_name: str | None,
    surname: str | None,
    digit: str | None = None,
    *,
    local: bool = False,
    interactive: bool | None = None,
    settings: Settings | None = None,
    controller: DisclosureController | None = None,
) -> int:
    settings = settings or get_settings()
    if interactive is None:
        interactive = ux.is_interactive()

    if interactive:
        dni = dni or ux.text_input("DNI", placeholder="12345678")
        given_name = given_name or ux.text_input("Given name", placeholder="e.g. JUAN CARLOS")
        surname = surname or ux.text_input("Surname(s)", placeholder="e.g. PEREZ GONZALES")
        if digit is None:
            digit = ux.text_input("Verification digit (optional)", placeholder="0")

    asserted = AssertedIdentity.create(dni or "", given_name or "", surname or "", digit)

    with ux.spinner("Checking identity..."):
        outcome = asyncio.run(fetch_outcome(asserted.id_number, settings, local=local))

    report = build_report(asserted, outcome.identity, outcome.directory)
    render_report(report)
    if not report.digit_available:
        ux.warning("No verification digit was available; only the names were compared.")

    controller = controller or DisclosureController()
    secret = outcome.directory.secret if isinstance(outcome.directory, Matched) else None
    if controller.unlock(report.verdict, secret) and interactive:
        run_disclosure(controller)
    controller.reset()

    return ExitCode.SUCCESS if report.verdict.confirmed else ExitCode.WARNING


@main_with_error_handling()
def lookup_command(dni: str, *, settings: Settings | None = None) -> int:
    """Print the raw server-side outcome for an ID number."""
    settings = settings or get_settings()
    if not is_valid_id_number(dni):
        raise ValidationError("DNI must be 8 digits", {"dni": dni})
    query = IdentityQuery(dni=dni)
    outcome = asyncio.run(build_verification_service(settings).validate(query))
    ux.console.print_json(json.dumps(outcome.to_payload(), ensure_ascii=False))
    return ExitCode.SUCCESS


def providers_command(settings: Settings | None = None) -> int:
    settings = settings or get_settings()
    table = Table(title="Identity providers")
    table.add_column("Priority")
    table.add_column("Name")
    table.add_column("Description")

    order = {name: i for i, name in enumerate(settings.identity_providers)}
    for spec in list_providers():
        position = order.get(spec.name)
        table.add_row(
            str(position + 1) if position is not None else "-",
            spec.name,
            spec.description or "",
        )
    ux.console.print(table)
    return ExitCode.SUCCESS
