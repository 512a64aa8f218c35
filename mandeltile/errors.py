class MandeltileError(Exception):
    pass

class ConfigError(MandeltileError, ValueError):
    pass

class PaletteError(MandeltileError, ValueError):
    pass

class StitchError(MandeltileError):
    pass

class MissingSegmentError(StitchError, FileNotFoundError):
    pass
