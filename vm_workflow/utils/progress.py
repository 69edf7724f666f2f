"""
VM Workflow - Progress Tracking

Visual progress feedback for the forward phase of a workflow, drawn with
tqdm. A silent tracker stands in when progress output is turned off.
"""

import sys
import time

from tqdm import tqdm


class ProgressTracker:
    """
    Track progress of workflow steps with a tqdm bar.

    Example:
        tracker = ProgressTracker(total_steps=11, desc="Walkthrough")
        tracker.start()

        tracker.update_step("rg")
        # ... do work ...
        tracker.advance()

        tracker.finish()
    """

    def __init__(self, total_steps: int, desc: str = "Workflow"):
        """
        Initialize progress tracker.

        Args:
            total_steps: Total number of steps in the workflow
            desc: Description shown left of the bar
        """
        self.total_steps = total_steps
        self.current_step = 0
        self.desc = desc
        self.current_step_name = ""
        self.start_time = None
        self.bar = None

    def start(self):
        """Start the progress tracker."""
        self.start_time = time.time()
        self.current_step = 0
        self.bar = tqdm(
            total=self.total_steps,
            desc=self.desc,
            bar_format='{desc}: {percentage:3.0f}%|{bar}| {n_fmt}/{total_fmt} [{elapsed}]',
            ncols=80,
            file=sys.stdout
        )

    def update_step(self, step_name: str):
        """Show the name of the step now running."""
        self.current_step_name = step_name
        if self.bar:
            self.bar.set_description(f"{self.desc} - {step_name}")

    def advance(self, steps: int = 1):
        """
        Advance the progress by one or more steps.

        Args:
            steps: Number of steps to advance (default: 1)
        """
        self.current_step += steps
        if self.bar:
            self.bar.update(steps)

    def finish(self):
        """Finish the progress tracker."""
        if self.bar:
            self.bar.close()
            self.bar = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
        return False


class SimpleProgressTracker:
    """
    Progress tracker that prints nothing.

    Used with --quiet and whenever output is not a terminal the user reads.
    """

    def __init__(self, total_steps: int = 0, desc: str = "Workflow"):
        self.total_steps = total_steps
        self.current_step = 0
        self.desc = desc

    def start(self):
        self.current_step = 0

    def update_step(self, step_name: str):
        pass

    def advance(self, steps: int = 1):
        self.current_step += steps

    def finish(self):
        pass

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
        return False


def create_progress_tracker(total_steps: int, desc: str = "Workflow", enabled: bool = True):
    """
    Factory function to create the appropriate progress tracker.

    Args:
        total_steps: Total number of steps
        desc: Description of the workflow
        enabled: Whether to show progress at all

    Returns:
        ProgressTracker or SimpleProgressTracker instance
    """
    if not enabled:
        return SimpleProgressTracker(total_steps, desc)
    return ProgressTracker(total_steps, desc)
