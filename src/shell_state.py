""" Current state of the shell. """
import os

class ShellState:
    def __init__(self):
        self.last_status = 0

    def set_status(self, status: int):
        # normalize like shells do
        self.last_status = int(status) if status is not None else 0

    def home(self) -> str:
        return os.environ.get("HOME", "/")
