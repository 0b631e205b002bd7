import argparse
from pathlib import Path

from nbsnapshot.core.config import get_settings
from nbsnapshot.core.errors import ConfigurationError
from nbsnapshot.core.logging import get_logger, setup_logging
from nbsnapshot.services.credentials import load_credentials
from nbsnapshot.services.snapshot_workflow import download_snapshot


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="download-snapshot",
        description="Download today's NationBuilder database snapshot",
    )
    parser.add_argument("-u", "--username", required=True, help="Nationbuilder Username")
    parser.add_argument(
        "-p",
        "--password_environment_var",
        required=True,
        help="Name of environment variable to read password from",
    )
    parser.add_argument("-t", "--otp", help="TOTP one-time password")
    parser.add_argument(
        "-n",
        "--nationbuilder_url",
        required=True,
        help="URL of your nationbuilder admin login page",
    )
    parser.add_argument("-o", "--output_dir", required=True, type=Path, help="Existing directory to save into")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def check_output_dir(output_dir: Path) -> Path:
    if not output_dir.is_dir():
        raise ConfigurationError(f"Output directory does not exist: {output_dir}")
    return output_dir


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()
    if args.headed:
        settings = settings.model_copy(update={"browser_headless": False})

    try:
        setup_logging((args.log_level or settings.log_level).upper(), settings.log_format)
        credentials = load_credentials(
            username=args.username,
            password_env_var=args.password_environment_var,
            otp=args.otp,
        )
        output_dir = check_output_dir(args.output_dir)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc

    download_snapshot(
        credentials=credentials,
        console_url=args.nationbuilder_url,
        output_dir=output_dir,
        settings=settings,
        logger=get_logger(f"{settings.app_name}.workflow"),
    )


if __name__ == "__main__":
    main()
