# --------------------------------------------------------------------
# errors.py: Exceptions and error management tools.
#
# Distributed under terms of the MIT license.
# --------------------------------------------------------------------


# --------------------------------------------------------------------
class BuildError(Exception):
    pass


# --------------------------------------------------------------------
class ConfigError(BuildError):
    pass


# --------------------------------------------------------------------
class InvalidTargetError(BuildError):
    def __init__(self, name):
        self.name = name
        super().__init__("'%s' is not a valid target." % name)
