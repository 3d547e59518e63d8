# avd_installer/common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Orchestrator running a fixed, ordered sequence of image build steps.
"""

import logging
from typing import Any, Callable, Dict, List, Optional


class Orchestrator:
    """Runs a series of defined tasks once, top to bottom."""

    def __init__(
        self,
        app_settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the Orchestrator.

        Args:
            app_settings: The application settings object.
            orchestrator_logger: An optional logger instance.
        """
        self.app_settings = app_settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.tasks: List[Dict[str, Any]] = []
        self.results: Dict[str, Any] = {}

    def add_task(
        self,
        name: str,
        func: Callable,
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
        fatal: bool = True,
    ):
        """
        Adds a task to the execution list.

        Args:
            name: A human-readable name for the task.
            func: The function to execute for this task. It receives
                ``app_settings`` as a keyword argument.
            args: A list of positional arguments to pass to the function.
            kwargs: A dictionary of keyword arguments to pass to the function.
            fatal: If True, a failure in this task is re-raised and halts the
                remaining sequence.
        """
        self.tasks.append({
            "name": name,
            "func": func,
            "args": args or [],
            "kwargs": kwargs or {},
            "fatal": fatal,
        })
        self.logger.debug(f"Task '{name}' added to the queue.")

    def task_names(self) -> List[str]:
        return [task["name"] for task in self.tasks]

    def run(self, dry_run: bool = False) -> bool:
        """
        Executes all added tasks in sequence.

        Args:
            dry_run: Only log the sequence without executing anything.

        Returns:
            True once every task has run (or been listed, for a dry run).

        Raises:
            Exception: The original error of the first fatal task that fails.
        """
        if dry_run:
            for i, name in enumerate(self.task_names()):
                self.logger.info(f"[dry-run] Stage {i + 1}: {name}")
            return True

        self.logger.info("Orchestration started.")
        for i, task in enumerate(self.tasks):
            task_name = task["name"]
            self.logger.info(
                f"--- Stage {i + 1}: Running task '{task_name}' ---"
            )

            try:
                kwargs = dict(task["kwargs"])
                kwargs["app_settings"] = self.app_settings
                self.results[task_name] = task["func"](*task["args"], **kwargs)
                self.logger.info(
                    f"✅ Task '{task_name}' completed successfully."
                )
            except Exception as e:
                self.logger.critical(
                    f"🔥 Task '{task_name}' failed: {e}", exc_info=True
                )
                if task["fatal"]:
                    self.logger.error(
                        "A fatal error occurred. Halting orchestration."
                    )
                    raise
                self.logger.warning(
                    f"Task '{task_name}' was non-fatal. Continuing orchestration."
                )

        self.logger.info("✨ Orchestration finished successfully.")
        return True
