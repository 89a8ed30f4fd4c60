"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for handling long-running tasks.

Why is this file needed?
------------------------
1. Responsiveness: Running the external model on the main thread freezes the
   GUI until it answers. These classes push the call to a background thread.
2. Signals: They provide a safe way to hand the answer back to the GUI thread
   using Qt Signals.

Classes:
    InferenceWorker: Runs one prompt through the inference collaborator.
"""
import logging
from PySide6.QtCore import QThread, Signal

from tronk.controller.inference import InferenceClient, InferenceResult

logger = logging.getLogger(__name__)


class InferenceWorker(QThread):
    # Signals to update the UI from the background
    result_ready = Signal(int, object)  # (ticket, InferenceResult)
    error_occurred = Signal(int, str)   # (ticket, message)

    def __init__(self, client: InferenceClient, prompt: str, ticket: int, parent=None):
        super().__init__(parent)
        self.client = client
        self.prompt = prompt
        self.ticket = ticket

    def run(self):
        try:
            logger.info(f"Starting inference request #{self.ticket} in background thread...")
            result: InferenceResult = self.client.run(self.prompt)
            self.result_ready.emit(self.ticket, result)
        except Exception as e:
            logger.exception(f"Error in InferenceWorker: {e}")
            self.error_occurred.emit(self.ticket, str(e))

    def cancel(self):
        """Stop the running request; the worker then emits a cancelled result and finishes."""
        logger.info(f"Cancelling inference request #{self.ticket}.")
        self.client.cancel()
