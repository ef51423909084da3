"""Skill-gap aggregation core for training-needs assessments."""

__version__ = "1.0.0"
