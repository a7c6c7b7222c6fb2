from .calendar import SampleCalendarConfig, generate_sample_calendar

__all__ = ["SampleCalendarConfig", "generate_sample_calendar"]
