"""
Judge-facing entry point for the ant-war engine.

Reads the init line from stdin, then plays rounds with the sample AI until
the judge closes the stream. Logs go to stderr; stdout carries the framed
operation batches only.
"""

import logging

from antwar import Controller, Operation, OperationType, load_config, run_with_ai, setup_logging

logger = logging.getLogger(__name__)

# Tower sites tried every round, by player
SAMPLE_SITES = (
    ((5, 9), (5, 3), (5, 15)),
    ((13, 9), (13, 3), (13, 15)),
)


def sample_ai(player_id, state):
    """Try to build on a few fixed sites; the gate drops what does not fit."""
    return [Operation(OperationType.BUILD_TOWER, x, y) for x, y in SAMPLE_SITES[player_id]]


def main():
    """Play one match over stdin/stdout."""
    import argparse

    parser = argparse.ArgumentParser(description="Ant-war engine runner")
    parser.add_argument("--data", default="data", help="Data directory holding config.yaml")
    parser.add_argument("--config", default=None, help="Path to config YAML (overrides --data)")
    parser.add_argument("--dump", default=None, help="Append a state dump here after every round")

    args = parser.parse_args()

    config = load_config(args.config, data_path=args.data)
    if args.dump:
        config.dump_path = args.dump
    setup_logging(config.log_level)

    controller = Controller.connect(config=config)
    run_with_ai(sample_ai, controller)
    logger.info(f"Finished as player {controller.self_player_id} at round {controller.state.round}")


if __name__ == "__main__":
    main()
