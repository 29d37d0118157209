"""memeagent: social-signal driven meme coin trading agent."""

__version__ = "0.1.0"
