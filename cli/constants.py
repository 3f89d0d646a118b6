"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "server", "token", "org", "config", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#0062FF bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;0;98;255m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 ██████╗  ██████╗ ██╗      █████╗ ██████╗
 ██╔══██╗██╔═══██╗██║     ██╔══██╗██╔══██╗
 ██████╔╝██║   ██║██║     ███████║██████╔╝
 ██╔═══╝ ██║   ██║██║     ██╔══██║██╔══██╗
 ██║     ╚██████╔╝███████╗██║  ██║██║  ██║
 ╚═╝      ╚═════╝ ╚══════╝╚═╝  ╚═╝╚═╝  ╚═╝  migrate
{RESET}"""

WELCOME_TITLE = "polar-migrate - move downloadable files to Polar"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "polar-migrate> "

HELP_TEXT = """Available commands:
  server <sandbox|production>         Select the Polar environment
  token <access-token>                Store the Polar access token
  org <organization-id>               Select the organization files belong to
  config                              Show the current configuration
  upload <file> [file ...]            Upload files as multipart uploads
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Files are sent in 10 MiB parts, one part at a time, with SHA-256 checksums.
Examples:
  server sandbox
  token polar_oat_xxxxxxxx
  org 1dbfc517-0bbf-4301-9ba8-555ca42b9737
  upload ./ebook.pdf ./bonus-tracks.zip"""
