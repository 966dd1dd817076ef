#!/usr/bin/env python3
"""
Run the Chinese Postman solver on a JSON road network and request.

Usage:
    python run_chinese_postman.py network.json request.json [--config CONFIG] [--output OUTPUT] [--verbose]

network.json:
    {"edges": [{"id": 1, "start": 10, "end": 20, "length": 125.0, "name": "High"}, ...]}

request.json:
    {"required_edges": [1, 2, 3],
     "avoid_edges": [],
     "origin": {"candidates": [{"edge_id": 1, "percent_along": 0.0}]},
     "destination": {"candidates": [{"edge_id": 3, "percent_along": 1.0}]}}
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from postman_core import (
    ChinesePostmanRequest,
    InMemoryGraphReader,
    PostmanError,
    SolverConfig,
    load_config,
    setup_logging,
    solve_chinese_postman,
)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Chinese Postman solver over required road-network edges'
    )
    parser.add_argument('network', help='JSON file with the road network edges')
    parser.add_argument('request', help='JSON file with required edges and locations')
    parser.add_argument('--config', help='JSON solver configuration file')
    parser.add_argument('--output', help='Write the solution as JSON to this file (default: stdout)')
    parser.add_argument('--percent-along-threshold', type=float,
                        help='Percent along an edge from which a location snaps to its end node')
    parser.add_argument('--no-validate', action='store_true',
                        help='Skip the final coverage and endpoint checks')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args(argv)

    logger = setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = load_config(args.config) if args.config else SolverConfig()
        if args.percent_along_threshold is not None:
            config.percent_along_threshold = args.percent_along_threshold
        if args.no_validate:
            config.validate_solution = False
        config.validate()

        reader = InMemoryGraphReader.from_json(args.network)
        with open(args.request, 'r', encoding='utf-8') as fh:
            request = ChinesePostmanRequest.from_dict(json.load(fh))

        logger.info("=" * 80)
        logger.info("CHINESE POSTMAN SOLVER")
        logger.info("=" * 80)
        logger.info(f"Network: {args.network} ({len(reader)} edges)")
        logger.info(f"Required edges: {len(request.required_edges)}, avoided: {len(request.avoid_edges)}")

        solution = solve_chinese_postman(reader, request, config=config)
    except PostmanError as e:
        code = f" [{e.error_code}]" if e.error_code is not None else ""
        logger.error(f"Solve failed{code}: {e}")
        return 1
    except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
        logger.error(f"Cannot read input: {e}")
        return 1

    result = {
        'edge_ids': solution.edge_ids,
        'origin_node': solution.origin.node_id,
        'destination_node': solution.destination.node_id,
        'source_pct': solution.source_pct,
        'target_pct': solution.target_pct,
        'is_ideal': solution.is_ideal,
        'matching_cost': solution.matching_cost,
        'total_length': solution.stats.total_length,
        'deadhead_length': solution.stats.deadhead_length,
        'path': [
            {
                'edge_id': info.edge_id,
                'mode': info.mode.value,
                'cost': info.cost,
                'path_distance': info.path_distance,
            }
            for info in solution.path
        ],
    }

    text = json.dumps(result, indent=2)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding='utf-8')
        logger.info(f"✓ Solution written to {args.output}")
    else:
        print(text)

    for message in solution.messages:
        logger.info(f"  {message}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
