"""
CLI entry point for the corpus topics pipeline.

Output layout:
    data/output/
    └── {YYYYMMDD_HHMMSS}_{input_stem}/
        ├── run_config.yaml           # PipelineConfig used for the run
        ├── descriptive_stats.csv     # Word, Frequency (frequency > 1)
        ├── summary.txt               # Total / unique word counts
        ├── common_words.csv          # Most frequent terms
        ├── topic_models.csv          # Topic, Rank, Word, Beta
        ├── topic_term_beta.csv       # Topic-term probabilities
        ├── document_topic_theta.csv  # Document-topic probabilities
        ├── model_info.json           # Hyperparameters, convergence, evaluation
        └── {input file}              # Copy of the input

Usage:
    python -m corpus_topics data/input/abstracts.csv
    python -m corpus_topics data/input/abstracts.csv --num-topics 8 --top-n 15
    python -m corpus_topics notes.txt --stopwords data study --seed 42
    python -m corpus_topics notes.txt --method gibbs --max-iterations 500
    python -m corpus_topics notes.txt --output-dir /tmp/topics --quiet
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from corpus_topics.config import ensure_directories, settings
from corpus_topics.exceptions import CorpusTopicsError
from corpus_topics.pipeline import PipelineConfig, TopicPipeline

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="corpus-topics",
        description="Corpus topics pipeline: Normalize -> Vectorize -> Describe -> Fit LDA -> Export",
    )
    ap.add_argument('input', help='Input CSV or newline-delimited text file')
    ap.add_argument('--output-dir', type=str, default=None, dest='output_dir',
                    help='Base output directory (default: data/output)')
    ap.add_argument('--num-topics', type=int, default=None, dest='num_topics',
                    help=f'Number of topics (default: {settings.topic_modeling.model.num_topics})')
    ap.add_argument('--stopwords', nargs='*', default=None, metavar='WORD',
                    help='Extra stopwords added to the configured list')
    ap.add_argument('--stopword-source', choices=['nltk', 'gensim', 'none'], default=None,
                    dest='stopword_source', help='Base English stopword list')
    ap.add_argument('--seed', type=int, default=None,
                    help=f'Random seed (default: {settings.reproducibility.random_seed})')
    ap.add_argument('--top-n', type=int, default=None, dest='top_n',
                    help='Terms per topic in the topic table')
    ap.add_argument('--method', choices=['vem', 'gibbs'], default=None,
                    help='Inference method (default: vem)')
    ap.add_argument('--max-iterations', type=int, default=None, dest='max_iterations',
                    help='EM iterations or Gibbs sweeps')
    ap.add_argument('--workers', type=int, default=None,
                    help='Threads for the variational E-step (default: 1)')
    ap.add_argument('--exclude-placeholder', action='store_true', default=None,
                    dest='exclude_placeholder',
                    help='Drop empty documents instead of counting the placeholder term')
    ap.add_argument('--coherence', action='store_true', default=None, dest='compute_coherence',
                    help='Compute gensim topic coherence')
    ap.add_argument('--quiet', action='store_true', help='Minimize console output')
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    custom_stopwords = None
    if args.stopwords:
        custom_stopwords = list(settings.preprocessing.custom_stopwords) + args.stopwords

    try:
        config = PipelineConfig.from_settings(
            settings,
            num_topics=args.num_topics,
            custom_stopwords=custom_stopwords,
            stopword_source=args.stopword_source,
            seed=args.seed,
            top_n=args.top_n,
            method=args.method,
            max_iterations=args.max_iterations,
            workers=args.workers,
            exclude_placeholder=args.exclude_placeholder,
            compute_coherence=args.compute_coherence,
        )
    except ValidationError as e:
        logger.error("Invalid options: %s", e)
        return 1

    try:
        if args.output_dir is None:
            ensure_directories()
        result = TopicPipeline(config).run_file(args.input, output_dir=args.output_dir)
    except CorpusTopicsError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    if not args.quiet:
        info = result.model_info
        print(f"\nTopics ({info.num_topics}, {info.method}, converged={info.converged}):")
        for topic_id in range(info.num_topics):
            print(f"  {info.get_topic_description(topic_id, num_words=config.top_n)}")
        print(result.statistics.summary_text(), end="")
        print(f"Results saved to: {result.output_dir}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
