# gradebook/core/exceptions.py

class GradebookError(Exception):
    """Base for domain errors raised by services and mapped to HTTP at the routers."""


class NotEnrolled(GradebookError):
    pass


class CompetencyMismatch(GradebookError):
    pass


class ScoreOutOfRange(GradebookError):
    pass


class CertificateNotEligible(GradebookError):
    pass


class CertificateAlreadyIssued(GradebookError):
    pass
