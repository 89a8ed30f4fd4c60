"""
Tests for the inference collaborator and its QThread worker.

subprocess.Popen is mocked in the unit tests; the cancellation test runs a
sleeping Python interpreter instead of a model.
"""

import subprocess
import sys
import threading
import time
from unittest.mock import patch, MagicMock

from tronk.config import Settings
from tronk.controller.inference import InferenceClient, InferenceResult


def _popen(mock_popen, returncode=0, stdout="", stderr=""):
    proc = mock_popen.return_value
    proc.communicate.return_value = (stdout, stderr)
    proc.returncode = returncode
    return proc


class TestInferenceClient:

    def test_default_command(self):
        assert InferenceClient().build_command("hi there") == ["ollama", "run", "tinyllama", "hi there"]

    def test_from_settings(self):
        settings = Settings(inference_executable="/opt/llm", inference_subcommand="ask",
                            inference_model="m1", inference_timeout=5.0)
        client = InferenceClient.from_settings(settings)
        assert client.build_command("p") == ["/opt/llm", "ask", "m1", "p"]
        assert client.timeout == 5.0

    @patch("tronk.controller.inference.subprocess.Popen")
    def test_success_returns_stdout(self, mock_popen):
        proc = _popen(mock_popen, stdout="answer\n", stderr="noise")
        client = InferenceClient()
        result = client.run("q")

        assert result == InferenceResult(ok=True, text="answer\n", returncode=0)
        args, kwargs = mock_popen.call_args
        assert args[0] == ["ollama", "run", "tinyllama", "q"]
        assert kwargs["stdout"] == subprocess.PIPE
        assert kwargs["stderr"] == subprocess.PIPE
        proc.communicate.assert_called_once_with(timeout=None)
        assert not client.is_running

    @patch("tronk.controller.inference.subprocess.Popen")
    def test_nonzero_exit_returns_stderr(self, mock_popen):
        _popen(mock_popen, returncode=1, stdout="", stderr="pull model first")
        result = InferenceClient().run("q")
        assert result.ok is False
        assert result.text == "pull model first"
        assert result.returncode == 1

    @patch("tronk.controller.inference.subprocess.Popen", side_effect=FileNotFoundError("No such file"))
    def test_missing_executable_is_not_fatal(self, _mock_popen):
        result = InferenceClient().run("q")
        assert result.ok is False
        assert result.text.startswith("failed to execute ollama command")

    @patch("tronk.controller.inference.subprocess.Popen")
    def test_timeout_kills_the_process(self, mock_popen):
        proc = mock_popen.return_value
        proc.communicate.side_effect = [subprocess.TimeoutExpired(cmd="ollama", timeout=1.0), ("", "")]
        client = InferenceClient(timeout=1.0)
        result = client.run("q")

        assert result.ok is False
        assert "timed out" in result.text
        proc.kill.assert_called_once()
        assert not client.is_running

    def test_cancel_without_requests(self):
        assert InferenceClient().cancel() == 0

    def test_cancel_stops_a_running_request(self):
        # A Python interpreter stands in for a model that never answers
        client = InferenceClient(executable=sys.executable, subcommand="-c",
                                 model="import sys, time; time.sleep(30)")
        results = []
        thread = threading.Thread(target=lambda: results.append(client.run("ignored")))
        thread.start()

        deadline = time.monotonic() + 10
        while not client.is_running and time.monotonic() < deadline:
            time.sleep(0.01)
        assert client.is_running

        started = time.monotonic()
        assert client.cancel() == 1
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert time.monotonic() - started < 5
        assert results[0].ok is False
        assert results[0].text == f"{sys.executable} request cancelled"
        assert not client.is_running


class TestInferenceWorker:

    def test_run_emits_result(self, qapp):
        from tronk.controller.workers import InferenceWorker

        client = MagicMock()
        client.run.return_value = InferenceResult(ok=True, text="hello")
        worker = InferenceWorker(client, "prompt", ticket=7)

        received = []
        worker.result_ready.connect(lambda ticket, result: received.append((ticket, result)))
        worker.run()  # run in this thread; the signal is delivered directly

        client.run.assert_called_once_with("prompt")
        assert received == [(7, InferenceResult(ok=True, text="hello"))]

    def test_run_reports_unexpected_errors(self, qapp):
        from tronk.controller.workers import InferenceWorker

        client = MagicMock()
        client.run.side_effect = RuntimeError("boom")
        worker = InferenceWorker(client, "prompt", ticket=3)

        errors = []
        worker.error_occurred.connect(lambda ticket, msg: errors.append((ticket, msg)))
        worker.run()

        assert errors == [(3, "boom")]

    def test_threaded_run(self, qapp):
        from tronk.controller.workers import InferenceWorker

        client = MagicMock()
        client.run.return_value = InferenceResult(ok=True, text="bg")
        worker = InferenceWorker(client, "prompt", ticket=1)
        worker.start()
        assert worker.wait(5000)
        client.run.assert_called_once_with("prompt")

    def test_cancel_forwards_to_the_client(self, qapp):
        from tronk.controller.workers import InferenceWorker

        client = MagicMock()
        worker = InferenceWorker(client, "prompt", ticket=2)
        worker.cancel()
        client.cancel.assert_called_once_with()
