"""Fantasy-console engine: palette graphics, a four-channel sound chip and a script-driven frame loop."""

__version__ = "0.1.0"