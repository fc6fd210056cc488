from __future__ import annotations

import argparse
import asyncio
import json
import signal
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analysis import (  # noqa: E402
    AnalysisError,
    AnalysisTransport,
    CVAnalysisService,
    CancellationToken,
    InvalidInputError,
    RequestLifecycle,
)
from app.core.config import settings  # noqa: E402


async def _run(cv_text: str, skills: str, api_url: str) -> int:
    lifecycle = RequestLifecycle()
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel)
    except (NotImplementedError, RuntimeError):  # pragma: no cover - Windows event loops
        pass

    async with AnalysisTransport(api_url) as transport:
        service = CVAnalysisService(transport, lifecycle)
        try:
            await service.analyze(cv_text, skills, token=token)
        except InvalidInputError as exc:
            print(f"Invalid input: {exc}", file=sys.stderr)
            return 2
        except AnalysisError:
            # Recorded on the lifecycle and reported below.
            pass

    state = lifecycle.state
    if state.status != "success" or state.result is None:
        print(f"Analysis failed [{state.error_code}]: {state.error}", file=sys.stderr)
        return 1
    print(json.dumps(state.result.model_dump(by_alias=True), ensure_ascii=False, indent=2))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a CV to the analysis API and print the rewritten CV.")
    parser.add_argument("--cv", default="-", help="Path to a plain-text CV, or '-' for stdin")
    parser.add_argument("--skills", default="", help="Additional skills to integrate")
    parser.add_argument("--api-url", default=settings.analysis_api_url, help="Analysis API base URL")
    args = parser.parse_args()

    if args.cv == "-":
        cv_text = sys.stdin.read()
    else:
        cv_text = Path(args.cv).read_text(encoding="utf-8")

    raise SystemExit(asyncio.run(_run(cv_text.strip(), args.skills, args.api_url)))


if __name__ == "__main__":
    main()
