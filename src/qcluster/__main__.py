"""
Cluster forum questions from the command line.

Usage:
    python3 -m qcluster posts.json --brand "Vision Pro" [--strict] [--seed 42]

posts.json holds a JSON list of {"id", "title", "body"} objects. The
clustering result and a short report are printed as JSON.

Environment Variables:
    GCP_PROJECT: Google Cloud project ID (unset -> mock clustering)
    GCP_REGION: Vertex AI region (default: europe-west4)
    LLM_MODEL: Labeling model (default: gemini-2.5-flash)
"""

import argparse
import dataclasses
import json
import logging
import sys

from .clustering import ClusteringInputError, build_engine
from .config import ClusteringConfig
from .report import summarize

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='qcluster',
        description='Group forum questions about a brand into labeled clusters'
    )
    parser.add_argument('posts', help='Path to a JSON file with a list of posts')
    parser.add_argument('--brand', required=True, help='Brand the posts are about')
    parser.add_argument(
        '--strict',
        action='store_true',
        help='Use the body-aware question filter'
    )
    parser.add_argument('--seed', type=int, help='Seed for centroid initialization')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    config = ClusteringConfig.from_env()
    if args.strict:
        config = dataclasses.replace(config, strict_filter=True)
    if args.seed is not None:
        config = dataclasses.replace(config, seed=args.seed)

    try:
        with open(args.posts, encoding='utf-8') as f:
            posts = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read posts from {args.posts}: {e}")
        return 1

    if not isinstance(posts, list):
        logger.error(f"{args.posts} must contain a JSON list of posts")
        return 1

    engine = build_engine(config)

    try:
        result = engine.cluster(posts, args.brand)
    except ClusteringInputError as e:
        logger.error(f"Clustering failed: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid post data: {e}")
        return 1

    output = result.to_dict()
    output['report'] = summarize(result.clusters)
    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
