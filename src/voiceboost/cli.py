"""
Command-line interface for offline boost detection.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from voiceboost.config import NOISE_FLOOR_RATIO, DetectorConfig
from voiceboost.io.exporter import TraceExporter
from voiceboost.pipeline import BoostSession


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="voice-boost",
        description="Track voice pitch in an audio file and derive a boost signal",
    )

    parser.add_argument(
        "input",
        type=Path,
        help="Input audio file (wav, mp3, flac)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Output trace file path (default: <input>_boost.json)",
    )

    parser.add_argument(
        "--format",
        choices=["json", "numpy"],
        default="json",
        help="Output format (default: json)",
    )

    parser.add_argument(
        "-s", "--sample-rate",
        type=int,
        default=44100,
        help="Analysis sample rate (default: 44100)",
    )

    parser.add_argument(
        "--bins",
        type=int,
        default=1024,
        help="Spectrum bins per frame, a power of two (default: 1024)",
    )

    parser.add_argument(
        "--tps",
        type=int,
        default=60,
        help="Ticks per second (default: 60)",
    )

    parser.add_argument(
        "--low",
        type=int,
        default=150,
        help="Frequency mapped to zero boost in Hz (default: 150)",
    )

    parser.add_argument(
        "--high",
        type=int,
        default=800,
        help="Frequency mapped to full boost in Hz (default: 800)",
    )

    parser.add_argument(
        "--threshold",
        type=float,
        default=1.0,
        help="Minimum normalized volume for any boost (default: 1.0)",
    )

    parser.add_argument(
        "--smoothing",
        type=float,
        default=0.0,
        help="Weight of the previous tick, 0-1 (default: 0)",
    )

    parser.add_argument(
        "--noise-floor",
        type=float,
        default=NOISE_FLOOR_RATIO,
        help=f"Peak detection floor relative to source volume (default: {NOISE_FLOOR_RATIO})",
    )

    parser.add_argument(
        "--truncate",
        action="store_true",
        help="Truncate frequencies to whole Hz",
    )

    parser.add_argument(
        "--labels",
        choices=["chroma", "solfege"],
        default="chroma",
        help="Note label table (default: chroma)",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress progress output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print trace summary to stdout",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    # Validate input
    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        config = DetectorConfig(
            low_freq_hz=args.low,
            high_freq_hz=args.high,
            threshold_volume=args.threshold,
            smoothing_weight=args.smoothing,
            sample_rate=args.sample_rate,
            n_bins=args.bins,
            noise_floor_ratio=args.noise_floor,
            ticks_per_second=args.tps,
            truncate_frequency=args.truncate,
            note_labels=args.labels,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Determine output path
    output_path = args.output
    if output_path is None:
        suffix = ".npz" if args.format == "numpy" else ".json"
        output_path = args.input.with_name(f"{args.input.stem}_boost{suffix}")

    if not args.quiet:
        print(f"Processing: {args.input}")
        print(f"Range: {config.low_freq_hz}-{config.high_freq_hz} Hz")

    session = BoostSession(config)
    results = session.process_file(args.input)

    exporter = TraceExporter()
    if args.format == "numpy":
        written = exporter.export_numpy(results, config, output_path)
    else:
        written = exporter.export_json(results, config, output_path)

    if not args.quiet:
        boosted = sum(1 for r in results if r.control > 0)
        print(f"Ticks: {len(results)}")
        print(f"Boosted ticks: {boosted}")
        print(f"Output: {written}")

    if args.summary:
        trace = exporter.to_dict(results, config)
        print("\n--- Trace Summary ---")
        print(json.dumps(trace["metadata"], indent=2, ensure_ascii=False))

        ticks = trace["ticks"]
        if len(ticks) > 0:
            peak = max(ticks, key=lambda t: t["control"])
            print(f"\nPeak tick: {json.dumps(peak, indent=2, ensure_ascii=False)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
