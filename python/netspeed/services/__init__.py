from .generator import RandomSampleProducer, RawSample, SampleProducer
from .speed_tests import SpeedTestService

__all__ = ["RandomSampleProducer", "RawSample", "SampleProducer", "SpeedTestService"]
