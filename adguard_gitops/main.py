import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adguard_gitops.client import AdGuardClient
from adguard_gitops.constants import (
    FILE_CONFIG,
    FILE_DNS_CONFIG,
    FILE_DNS_ACCESS,
    FILE_USER_RULES,
    FILE_DHCP,
    FILE_TLS,
    FOLDER_CLIENTS,
    FOLDER_LIST_FILTERS,
    FOLDER_REWRITES,
)
from adguard_gitops.enumerations import EnumerationCache
from adguard_gitops.errors import AdGuardError
from adguard_gitops.loader import DataLoader
from adguard_gitops.models import (
    ConfigModel,
    DnsSettingsModel,
    DnsAccessModel,
    UserRulesModel,
    ClientModel,
    ListFilterModel,
    RewriteModel,
    DhcpConfigModel,
    TlsConfigModel,
)
from adguard_gitops.settings import Settings
from adguard_gitops.syncers import (
    ConfigSyncer,
    ClientSyncer,
    DnsConfigSyncer,
    DnsAccessSyncer,
    ListFilterSyncer,
    RewriteSyncer,
    UserRulesSyncer,
    DhcpConfigSyncer,
    TlsConfigSyncer,
)

app = typer.Typer()
console = Console()


def run_sync(dry_run: bool = False, base_path: str = "."):
    """
    Core sync logic - called by both the command and the callback.

    Phase 1: Global settings (Config, DNS Config, DNS Access, DHCP, Encryption)
    Phase 2: Filtering (List Filters, User Rules, Rewrites)
    Phase 3: Clients
    """
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        console.print(f"[bold red]Error: invalid AdGuard Home connection settings![/bold red]\n{escape(str(e))}")
        raise typer.Exit(code=1)

    # =========================================================================
    # 1. LOAD DATA
    # =========================================================================
    try:
        loader = DataLoader(base_path)

        config = loader.load_file(FILE_CONFIG, ConfigModel)
        dns_config = loader.load_file(FILE_DNS_CONFIG, DnsSettingsModel)
        dns_access = loader.load_file(FILE_DNS_ACCESS, DnsAccessModel)
        user_rules = loader.load_file(FILE_USER_RULES, UserRulesModel)
        dhcp = loader.load_file(FILE_DHCP, DhcpConfigModel)
        tls = loader.load_file(FILE_TLS, TlsConfigModel)

        list_filters = loader.load_from_folder(FOLDER_LIST_FILTERS, ListFilterModel)
        rewrites = loader.load_from_folder(FOLDER_REWRITES, RewriteModel)
        clients = loader.load_from_folder(FOLDER_CLIENTS, ClientModel)
    except (ValidationError, yaml.YAMLError) as e:
        console.print(f"[bold red]✗ Invalid declaration:[/bold red]\n{escape(str(e))}")
        raise typer.Exit(code=1)

    if config is not None and dns_config is not None:
        console.print("[yellow]Warning: DNS settings declared twice (config.dns and dns_config), "
                      "dns_config wins.[/yellow]")

    # =========================================================================
    # 2. INIT SYNCERS
    # =========================================================================
    client = AdGuardClient.from_settings(settings)
    # One enumeration cache for the whole run
    enumerations = EnumerationCache.for_client(client)

    config_syncer = ConfigSyncer(client, enumerations, dry_run=dry_run)
    dns_syncer = DnsConfigSyncer(client, enumerations, dry_run=dry_run)
    access_syncer = DnsAccessSyncer(client, enumerations, dry_run=dry_run)
    dhcp_syncer = DhcpConfigSyncer(client, enumerations, dry_run=dry_run)
    tls_syncer = TlsConfigSyncer(client, enumerations, dry_run=dry_run)
    filter_syncer = ListFilterSyncer(client, enumerations, dry_run=dry_run)
    rules_syncer = UserRulesSyncer(client, enumerations, dry_run=dry_run)
    rewrite_syncer = RewriteSyncer(client, enumerations, dry_run=dry_run)
    client_syncer = ClientSyncer(client, enumerations, dry_run=dry_run)

    # =========================================================================
    # 3. EXECUTE SYNC
    # =========================================================================
    try:
        console.rule("[bold cyan]Phase 1: Global Settings[/bold cyan]")
        if config is not None:
            config_syncer.sync(config)
        if dns_config is not None:
            dns_syncer.sync(dns_config)
        if dns_access is not None:
            access_syncer.sync(dns_access)
        if dhcp is not None:
            dhcp_syncer.sync(dhcp)
        if tls is not None:
            tls_syncer.sync(tls)

        console.rule("[bold cyan]Phase 2: Filtering[/bold cyan]")
        filter_syncer.sync(list_filters)
        if user_rules is not None:
            rules_syncer.sync(user_rules)
        rewrite_syncer.sync(rewrites)

        console.rule("[bold magenta]Phase 3: Clients[/bold magenta]")
        client_syncer.sync(clients)

    except KeyboardInterrupt:
        console.print("\n[yellow]⚠ Sync interrupted by user[/yellow]")
        raise typer.Exit(code=130)

    except AdGuardError as e:
        console.print(f"\n[bold red]✗ {type(e).__name__}: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1)

    # =========================================================================
    # 4. SUMMARY
    # =========================================================================
    if dry_run:
        console.print("\n[bold yellow]⚠ DRY RUN COMPLETE: No changes applied.[/bold yellow]")
    else:
        console.print("\n[bold green]✔ SYNC COMPLETE: Changes applied.[/bold green]")


@app.command()
def sync(
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate changes without applying them."),
    base_path: str = typer.Option(".", "--base-path", help="Folder containing the adguard/ declarations."),
):
    """
    Syncs declared configuration to AdGuard Home.

    Phase 1: Global Settings (Config, DNS Config, DNS Access, DHCP, Encryption)
    Phase 2: Filtering (List Filters, User Rules, Rewrites)
    Phase 3: Clients
    """
    run_sync(dry_run=dry_run, base_path=base_path)


# =========================================================================
# CALLBACK: Makes 'sync' the default command (for CI/CD compatibility)
# =========================================================================
@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Simulate changes without applying them."),
    base_path: str = typer.Option(".", "--base-path", help="Folder containing the adguard/ declarations."),
):
    """
    AdGuard GitOps Controller

    Syncs declared configuration as code to AdGuard Home.
    """
    if ctx.invoked_subcommand is None:
        run_sync(dry_run=dry_run, base_path=base_path)


if __name__ == "__main__":
    app()
