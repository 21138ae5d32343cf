"""Main entry point for the String Tuner CLI."""

import sys
import time
import argparse
from typing import List, Optional

import soundfile as sf

from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..core.interfaces import IAudioProvider
from ..core.tuner import Tuner
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_utils import get_note_name
from ..tuner_types import TuningResult, TuningStatus

logger = get_logger(__name__)

METER_WIDTH = 41


def render_meter(fraction: float, width: int = METER_WIDTH) -> str:
    """Draw the display fraction as a text needle, e.g. '[----|----]'."""
    position = round(fraction * (width - 1))
    cells = ["-"] * width
    cells[width // 2] = "+"
    cells[position] = "|"
    return "[" + "".join(cells) + "]"


def format_result(result: TuningResult) -> str:
    """One status line for a tuning result."""
    if result.status is TuningStatus.SILENT:
        return f"{'silent':<10} level {result.signal_rms:.4f}"
    if result.status is TuningStatus.NO_PITCH:
        return f"{'no pitch':<10} level {result.signal_rms:.4f}"

    return (
        f"{result.status.value:<10} {result.estimated_frequency:7.2f} Hz "
        f"({get_note_name(result.estimated_frequency):>4}) "
        f"string {result.matched_tone.label:<3} {result.cents_deviation:+7.2f} cents  "
        f"{result.direction.value:<8} {render_meter(result.display_fraction)}"
    )


def resolve_string(tuner: Tuner, label: Optional[str]) -> Optional[int]:
    """Turn a --string label into an index into the tuner's table."""
    if label is None:
        return None
    try:
        return tuner.table.index_of(label)
    except KeyError:
        raise ValueError(
            f"Unknown string {label!r}; choose from {', '.join(tuner.table.labels)}"
        ) from None


def run_tuner(
    tuner: Tuner,
    provider: IAudioProvider,
    selected_index: Optional[int] = None,
    duration: Optional[float] = None,
) -> int:
    """Pull frames from the provider and print a line for each.

    Returns:
        Number of frames analyzed
    """
    analyzed = 0
    start_time = time.time()
    with provider:
        for frame in provider.frames():
            print(format_result(tuner.analyze_frame(frame, selected_index)), flush=True)
            analyzed += 1
            if duration is not None and time.time() - start_time >= duration:
                break
    return analyzed


def print_devices() -> None:
    from ..services.live_audio import list_input_devices

    print("\nAvailable audio input devices:")
    print("-" * 30)
    for device in list_input_devices():
        print(
            f"{device['index']}: {device['name']} "
            f"({device['channels']} ch, {device['default_samplerate'] / 1000:.1f}kHz)"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="String Tuner - pitch detection for guitar tuning")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config-dir", type=str, default=None, help="Configuration directory (default: ~/.config/string_tuner)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("devices", help="List audio input devices")

    file_parser = subparsers.add_parser("file", help="Analyze a recorded sound file")
    file_parser.add_argument("path", type=str, help="Path to a WAV (or other libsndfile) file")
    file_parser.add_argument(
        "--frame-size", type=int, default=None, help="Samples per analyzed frame (default: from config)"
    )
    file_parser.add_argument("--hop-size", type=int, default=None, help="Samples between frame starts")
    file_parser.add_argument("--gain", type=float, default=1.0, help="Gain applied to the samples")
    file_parser.add_argument("--string", type=str, default=None, help="Pin the meter to a string, e.g. A2")

    live_parser = subparsers.add_parser("live", help="Tune from an audio input device")
    live_parser.add_argument("--device", type=int, default=None, help="Audio input device ID")
    live_parser.add_argument("--sample-rate", type=int, default=None, help="Sample rate in Hz")
    live_parser.add_argument("--frame-size", type=int, default=None, help="Samples per analyzed frame")
    live_parser.add_argument(
        "--duration", type=float, default=None, help="Stop after this many seconds (default: until Ctrl+C)"
    )
    live_parser.add_argument("--string", type=str, default=None, help="Pin the meter to a string, e.g. A2")

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    setup_logging("DEBUG" if parsed_args.debug else None)

    if parsed_args.command is None:
        parser.print_help()
        return 1

    try:
        if parsed_args.command == "devices":
            print_devices()
            return 0

        factory = ComponentFactory(ConfigManager(parsed_args.config_dir))
        tuner = factory.create_tuner()
        selected_index = resolve_string(tuner, parsed_args.string)

        if parsed_args.command == "file":
            provider = factory.create_audio_provider(
                "wav",
                file_path=parsed_args.path,
                frame_size=parsed_args.frame_size,
                hop_size=parsed_args.hop_size,
                gain=parsed_args.gain,
            )
            analyzed = run_tuner(tuner, provider, selected_index)
        else:
            provider = factory.create_audio_provider(
                "live",
                device_id=parsed_args.device,
                sample_rate=parsed_args.sample_rate,
                frame_size=parsed_args.frame_size,
            )
            print("Listening... press Ctrl+C to stop")
            analyzed = run_tuner(tuner, provider, selected_index, parsed_args.duration)

        logger.info(f"Analyzed {analyzed} frames")
        return 0
    except KeyboardInterrupt:
        print("\nStopped by user.")
        return 0
    except (ValueError, RuntimeError, OSError, sf.LibsndfileError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
