"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without external dependencies:

- FakePackageLocatorPort: Canned package descriptor lookups
- FakeProgramPort: Canned linked programs
- FakeRunnerPort: Configurable doctest outcomes, captured invocations
- FakeReporterPort: Captured report events for assertion
"""

from .package import FakePackageLocatorPort
from .program import FakeProgramPort
from .reporter import FakeReporterPort
from .runner import FakeRunnerPort

__all__ = [
    "FakePackageLocatorPort",
    "FakeProgramPort",
    "FakeReporterPort",
    "FakeRunnerPort",
]
