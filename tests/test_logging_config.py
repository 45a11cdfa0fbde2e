from __future__ import annotations

import json
import logging

from spatial_moments.core.config_schema import validate_problem
from spatial_moments.core.solver import solve
from spatial_moments.io.logging_config import MomentsJSONFormatter, setup_logging


def test_moments_json_formatter_includes_context_fields() -> None:
    record = logging.LogRecord(
        name="spatial_moments",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg="unit test message",
        args=(),
        exc_info=None,
    )
    record.solver_context = {"nodes": 128}  # type: ignore[attr-defined]
    payload = json.loads(MomentsJSONFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "unit test message"
    assert payload["solver_context"]["nodes"] == 128


def test_setup_logging_emits_json_lines(capsys) -> None:
    logger = logging.getLogger("spatial_moments")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    try:
        setup_logging(level=logging.INFO, json_output=True)
        logger.info("iteration report", extra={"solver_context": {"residual": 1e-7}})
        out = capsys.readouterr().out.strip().splitlines()
        assert out
        parsed = json.loads(out[-1])
        assert parsed["message"] == "iteration report"
        assert parsed["solver_context"]["residual"] == 1e-7
    finally:
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)


def test_setup_logging_replaces_previous_handlers(tmp_path) -> None:
    logger = logging.getLogger("spatial_moments")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    log_file = tmp_path / "solver.log"
    try:
        setup_logging(level=logging.DEBUG, json_output=False)
        setup_logging(level=logging.DEBUG, json_output=True, log_file=str(log_file))
        assert len(logger.handlers) == 2
        logger.warning("written to file")
        for handler in logger.handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["message"] == "written to file"
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)


def test_solver_records_flow_through_json_formatter(capsys) -> None:
    logger = logging.getLogger("spatial_moments")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    try:
        setup_logging(level=logging.INFO, json_output=True)
        problem = validate_problem(
            {
                "nodes": 32,
                "b": 1.0,
                "s": 0.5,
                "d": 0.1,
                "kernels": {"family": "n", "params": [0.3, 0.3]},
                "method": "nystrom",
            }
        )
        solve(problem)
        records = [
            json.loads(line)
            for line in capsys.readouterr().out.splitlines()
            if line.startswith("{")
        ]
        solved = [rec for rec in records if "solver_context" in rec]
        assert solved
        assert solved[-1]["solver_context"]["method"] == "nystrom"
        assert solved[-1]["solver_context"]["nodes"] == 32
    finally:
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)
