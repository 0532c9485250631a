from __future__ import annotations

import logging
import sys

import yaml
from uvicorn.logging import DefaultFormatter

from .config import RunnerCfg, default_config_path, load_config, resolve_api_key
from .errors import ChatOnceError, ConfigurationError
from .runner import ChatOutcome, RequestRunner

logger = logging.getLogger(__name__)


def setup_logging(level: str = "WARNING") -> None:
    """Send package log records to stderr so stdout only carries the answer."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(DefaultFormatter(fmt="%(levelprefix)s %(message)s", use_colors=sys.stderr.isatty()))
    pkg = logging.getLogger("chat_once")
    pkg.handlers.clear()
    pkg.addHandler(handler)
    pkg.setLevel(level)


def _load_runner_cfg() -> RunnerCfg:
    path = default_config_path()
    if not path.exists():
        return RunnerCfg()
    try:
        return load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc


def _render(outcome: ChatOutcome) -> None:
    reply = outcome.reply
    if reply is None:
        print("No response was returned by the API.")
        print("Response body:", outcome.raw_body)
        return

    usage = outcome.response.usage
    print("Assistant reply:")
    print(reply)
    print(
        f"\nTokens used: {usage.total_tokens} "
        f"(prompt: {usage.prompt_tokens}, completion: {usage.completion_tokens})"
    )


def main() -> None:
    setup_logging()
    try:
        cfg = _load_runner_cfg()
        # fatal diagnostics must always reach stderr
        logging.getLogger("chat_once").setLevel(min(logging.getLevelName(cfg.log_level), logging.ERROR))
        api_key = resolve_api_key(cfg.env_key)
        outcome = RequestRunner(api_key, cfg).run()
    except ChatOnceError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    _render(outcome)


if __name__ == "__main__":
    main()
