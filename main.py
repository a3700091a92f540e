"""
Brainrot - Real-time meme matching for facial expressions and hand gestures

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Brainrot - Expression & Gesture Meme Matcher",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--assets",
        type=Path,
        default=None,
        help="Meme assets directory (overrides config)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device index (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Run an OpenCV debug window with landmarks and live labels",
    )

    return parser.parse_args(argv)


def run_debug(config, pool):
    """
    Run detection in an OpenCV window - camera feed, landmarks and labels.
    Useful for tuning thresholds.
    """
    import cv2
    from detection import FrameOrchestrator, format_badge
    from detection.tracker import LandmarkTracker

    tracker = LandmarkTracker(config)
    orchestrator = FrameOrchestrator.from_config(config, pool)

    print("Starting debug mode...")
    print("Press 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not start landmark tracking")
        return 1

    last_active = None
    try:
        while True:
            tracked = tracker.read()
            if tracked is None:
                if cv2.waitKey(10) & 0xFF == ord('q'):
                    break
                continue

            result = orchestrator.process(tracked.face, tracked.hand)
            frame = tracker.draw_landmarks(tracked)

            info_lines = [
                f"Expression: {result.expression.value} ({result.expression_confidence:.2f})",
                f"Gesture: {result.gesture.value} ({result.gesture_confidence:.2f})",
                f"Active: {result.active.value}",
                f"FPS: {result.fps}",
            ]
            for i, line in enumerate(info_lines):
                cv2.putText(
                    frame, line, (10, 30 + i * 25),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                )

            # Print category changes to console
            if result.active != last_active:
                print(f"[{tracker.frame_count:5d}] {format_badge(result.active, result.confidence)}"
                      f" -> {result.asset}")
                last_active = result.active

            cv2.imshow("Brainrot Debug", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    finally:
        tracker.stop()
        orchestrator.reset()
        cv2.destroyAllWindows()

    return 0


def run_app(config, pool):
    """Run Brainrot with the meme window (multithreaded)."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from detection.worker import DetectionWorker
    from ui import MemeWindow

    app = QApplication(sys.argv)

    window = MemeWindow(
        title=config.ui.window_title,
        crossfade_duration=config.transitions.crossfade_duration,
        show_camera=config.ui.show_camera,
    )
    window.show()

    # Setup background worker and thread
    thread = QThread()
    worker = DetectionWorker(config, pool)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    # Connect signals (QueuedConnection so UI updates happen in main thread)
    thread.started.connect(worker.start_process)
    worker.result_ready.connect(window.show_result, Qt.QueuedConnection)
    worker.frame_ready.connect(window.set_webcam_frame, Qt.QueuedConnection)
    worker.error.connect(lambda msg: print(f"WORKER ERROR: {msg}"), Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from detection import load_config
    from memes import build_pool
    config = load_config(args.config)

    # Apply CLI overrides
    if args.assets:
        config.memes.assets_dir = str(args.assets)
    if args.camera is not None:
        config.camera.device_id = args.camera

    print("Brainrot starting...")
    print(f"  Camera: {config.camera.device_id}")
    print(f"  Assets: {config.memes.assets_dir}")
    print(f"  Debug: {args.debug}")
    print()

    pool = build_pool(config.memes)
    if not pool.is_ready():
        print("WARNING: No meme assets found, only labels will be shown")

    if args.debug:
        return run_debug(config, pool)
    return run_app(config, pool)


if __name__ == "__main__":
    sys.exit(main())
