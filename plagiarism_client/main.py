from dotenv import load_dotenv

# Load env vars before any other imports to ensure they are available
load_dotenv()

import sys
import asyncio
import logging
import argparse
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from plagiarism_client.config import Settings
from plagiarism_client.models.schemas import RewriteMode
from plagiarism_client.routes.navigation import Navigator
from plagiarism_client.services.gateway import BackendGateway
from plagiarism_client.services.results import ResultsController, ResultsPhase
from plagiarism_client.services.rewriter import RewriteController
from plagiarism_client.services.submission import SubmissionController, SubmissionPhase
from plagiarism_client.utils.errors import CheckerError
from plagiarism_client.utils.exporters import FileSaver, SystemClipboard
from plagiarism_client.utils.file_types import PLAIN_TEXT, DroppedFile

logger = logging.getLogger("plagiarism_client")


def print_alert(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def describe_config_error(error: PydanticValidationError) -> str:
    problems = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"])
        problems.append(f"{field}: {err['msg']}" if field else err["msg"])
    return "Invalid configuration: " + "; ".join(problems)


async def show_results(task_id: str, gateway: BackendGateway, navigator: Navigator,
                       settings: Settings, download: bool = False) -> int:
    results = ResultsController(
        task_id, gateway, navigator,
        saver=FileSaver(settings.download_dir),
        policy=settings.policy,
        alert=print_alert,
    )
    await results.mount()
    print(results.render(color=sys.stdout.isatty()), end="")
    if results.state.phase != ResultsPhase.LOADED:
        return 1
    if download:
        path = await results.download()
        if path is None:
            return 1
        print(f"Report saved to {path}")
    return 0


async def run_check(args, settings: Settings) -> int:
    navigator = Navigator()
    async with BackendGateway(settings) as gateway:
        submission = SubmissionController(gateway, navigator)

        if args.file:
            dropped = DroppedFile.from_path(args.file)
            task_id = await submission.drop(dropped)
            if dropped.content_type == PLAIN_TEXT:
                # Loaded into the buffer; check it as-is
                task_id = await submission.check(args.source)
        else:
            submission.set_text(args.text or sys.stdin.read())
            task_id = await submission.check(args.source)

        if submission.state.phase == SubmissionPhase.ERROR or task_id is None:
            print_alert(submission.state.error or "Submission failed.")
            return 1

        print(f"Task: {task_id}")
        return await show_results(task_id, gateway, navigator, settings, args.download)


async def run_results(args, settings: Settings) -> int:
    async with BackendGateway(settings) as gateway:
        return await show_results(args.task_id, gateway, Navigator(), settings, args.download)


async def run_rewrite(args, settings: Settings, generate: bool = False) -> int:
    async with BackendGateway(settings) as gateway:
        rewriter = RewriteController(
            gateway,
            saver=FileSaver(settings.download_dir),
            clipboard=SystemClipboard(),
            alert=print_alert,
        )
        rewriter.set_text(args.text or sys.stdin.read())
        if not generate:
            rewriter.set_mode(args.mode)
            result = await rewriter.rewrite()
        else:
            result = await rewriter.generate()
        if result is None:
            return 1

        print(result)
        status = 0
        if args.copy and not rewriter.copy():
            status = 1
        if args.doc:
            path = rewriter.export_word()
            if path is None:
                status = 1
            else:
                print(f"Word document saved to {path}")
        if args.pdf:
            path = await rewriter.export_pdf()
            if path is None:
                status = 1
            else:
                print(f"PDF saved to {path}")
        return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plagiarism-check",
        description="Submit text or documents for plagiarism analysis, view reports and rewrite flagged text.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Check text (argument or stdin) or a .txt/.pdf/.docx file")
    given = check.add_mutually_exclusive_group()
    given.add_argument("text", nargs="?", help="Text to analyze")
    given.add_argument("--file", help="Path to a .txt, .pdf or .docx file")
    check.add_argument("--source", action="append", help="Source text to compare against (repeatable)")
    check.add_argument("--download", action="store_true", help="Save the PDF report")

    results = sub.add_parser("results", help="Show the report for a task")
    results.add_argument("task_id")
    results.add_argument("--download", action="store_true", help="Save the PDF report")

    for name, help_text in (
        ("rewrite", "Rewrite text in the selected mode"),
        ("generate", "Fix everything: comprehensive rewrite"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("text", nargs="?", help="Text to rewrite (defaults to stdin)")
        if name == "rewrite":
            cmd.add_argument(
                "--mode",
                default=RewriteMode.ACADEMIC.value,
                choices=[m.value for m in RewriteMode if m != RewriteMode.COMPREHENSIVE],
            )
        cmd.add_argument("--copy", action="store_true", help="Copy the result to the clipboard")
        cmd.add_argument("--doc", action="store_true", help="Save as rewritten_text.doc")
        cmd.add_argument("--pdf", action="store_true", help="Save as ai_generated_document.pdf")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings.from_env()
    except PydanticValidationError as e:
        print_alert(describe_config_error(e))
        return 1

    # Configure logging
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))

    try:
        if args.command == "check":
            return asyncio.run(run_check(args, settings))
        if args.command == "results":
            return asyncio.run(run_results(args, settings))
        if args.command == "rewrite":
            return asyncio.run(run_rewrite(args, settings))
        return asyncio.run(run_rewrite(args, settings, generate=True))
    except CheckerError as e:
        print_alert(e.message)
        return 1
    except OSError as e:
        print_alert(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
