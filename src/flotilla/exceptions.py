class FlotillaError(Exception):
    """Base for all flotilla exceptions."""

    pass


class ConfigError(FlotillaError):
    """Invalid or inconsistent simulation configuration."""

    pass


class GenomeError(FlotillaError):
    """Genome values that cannot describe a working agent."""

    pass


class CheckpointError(FlotillaError):
    """Winner checkpoint could not be persisted."""

    pass
