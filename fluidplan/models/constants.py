"""Constants for fluidplan.

This module centralizes all magic numbers and default values used throughout the application.
"""

from datetime import time


# Task defaults
DEFAULT_DURATION_MINUTES = 60

# Scheduling
DEFAULT_GRANULARITY_MINUTES = 15
DEFAULT_LOOKAHEAD_DAYS = 14

# Auto-schedule settings defaults (Monday-Friday, 9-5)
DEFAULT_WORK_DAYS = [1, 2, 3, 4, 5]  # Sunday=0 ... Saturday=6
DEFAULT_WORK_HOUR_START = 9
DEFAULT_WORK_HOUR_END = 17
DEFAULT_BUFFER_MINUTES = 15
DEFAULT_MAX_CONSECUTIVE_HOURS = 3
DEFAULT_MIN_BREAK_DURATION = 10

# Energy windows written when settings are first created (hour-of-day)
DEFAULT_HIGH_ENERGY_WINDOW = (9, 12)
DEFAULT_MEDIUM_ENERGY_WINDOW = (13, 16)
DEFAULT_LOW_ENERGY_WINDOW = (16, 18)

# Time-of-day preference boundaries (hour-of-day, start inclusive)
MORNING_END_HOUR = 12
EVENING_START_HOUR = 17

# Scoring weights
ENERGY_WEIGHT = 1.5
TIME_PREFERENCE_WEIGHT = 1.2
DEADLINE_WEIGHT = 2.0
PRIORITY_WEIGHT = 1.8
NEUTRAL_SCORE = 0.5
DEADLINE_DECAY_DAYS = 7.0

# Break policy
HIGH_SEVERITY_GAP_MINUTES = 5
HIGH_SEVERITY_BLOCK_RATIO = 1.5
LONG_BREAK_MULTIPLIER = 2
LUNCH_WINDOW_START = time(11, 30)
LUNCH_WINDOW_END = time(13, 30)
LUNCH_MIN_GAP_MINUTES = 30
LUNCH_SUGGESTED_TIME = time(12, 0)
LUNCH_SUGGESTED_DURATION = 60
