"""Entry point: ``python -m epic_progression``.

Supports two modes:
  - ``python -m epic_progression``        → Launch the FastAPI server
  - ``python -m epic_progression cli``    → Advance a sample character and print the trace
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Epic Level Progression Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--ceiling", type=str, default="level_scaled", choices=["level_scaled", "flat"])
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Advance a sample character from level 20")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--character-class", type=str, default="wizard")
    cli.add_argument("--target", type=int, default=30)
    cli.add_argument("--ceiling", type=str, default="level_scaled", choices=["level_scaled", "flat"])
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from epic_progression.api.app import create_app
    from epic_progression.config import ProgressionConfig

    config = ProgressionConfig(
        rng_seed=args.seed,
        ability_ceiling_rule=args.ceiling,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from epic_progression.api.service import ProgressionService
    from epic_progression.config import ProgressionConfig
    from epic_progression.core.classes import CLASS_DEFS, class_by_name
    from epic_progression.core.enums import DecisionKind
    from epic_progression.core.experience import experience_for_level
    from epic_progression.utils.logging import setup_logging

    config = ProgressionConfig(
        rng_seed=args.seed,
        ability_ceiling_rule=args.ceiling,
        log_level=args.log_level,
    )
    setup_logging(config.log_level)

    service = ProgressionService(config)
    cdef = CLASS_DEFS[class_by_name(args.character_class)]
    hero = service.create_character(
        name="Sample Hero",
        character_class=args.character_class,
        level=20,
        experience=experience_for_level(args.target, config),
        abilities={"str": 18, "dex": 16, "con": 16, "int": 24, "wis": 16, "cha": 14},
        feats=["Toughness", "Iron Will", "Improved Initiative"],
        skills={"knowledge (arcana)": 24},
        spellcraft_ranks=24 if cdef.spellcaster else None,
    )

    result = service.advance(hero.character_id, args.target)
    for step in result.steps:
        logger.info(
            "Level %d: +%d HP, +%d SP, +%d BAB%s%s",
            step.level, step.hp_gain, step.skill_point_gain, step.attack_gain,
            ", epic capability due" if step.capability_decision else "",
            f", {step.ability_decision.count} ability increase(s) due" if step.ability_decision else "",
        )

    # Resolve every decision with the strongest option
    for decision in list(hero.pending_decisions):
        if decision.kind == DecisionKind.EPIC_CAPABILITY:
            pick = next(
                (o for o in decision.options
                 if service.catalog.get(o).repeatable or not hero.has_epic_capability(o)),
                None,
            )
            if pick is None:
                continue
            service.resolve_decision(hero.character_id, decision.level, "epic_capability", pick)
        else:
            pick = "int" if "int" in decision.options else decision.options[0]
            service.resolve_decision(hero.character_id, decision.level, "ability_increase", [pick] * decision.count)

    report = service.report(hero.character_id)
    logger.info(
        "Done. %s is level %d with %d epic capabilities; milestones %s (%.1f%%)",
        hero.name, hero.level, hero.epic_capability_count,
        ", ".join(report["achieved_milestones"]) or "none", report["completion_percent"],
    )


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            # Re-parse with serve defaults
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
