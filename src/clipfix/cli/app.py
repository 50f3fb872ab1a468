import typer

from clipfix.cli.fix import fix, scan
from clipfix.cli.watch import watch

app = typer.Typer(
    name="clipfix",
    help="Normalize AudioClip.play calls and content references in FrayTools projects.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("fix")(fix)
app.command("scan")(scan)
app.command("watch")(watch)


def main() -> None:
    app()
