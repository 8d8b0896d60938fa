from .defs import AnglePolicy, Model


# == Correction == #

DEFAULT_MODEL: Model = Model.VantagePro2
ANGLE_POLICY: AnglePolicy = AnglePolicy.Wrap


# == Reporting == #

# Reference results are printed to one decimal place, and every one of them
# falls exactly on a tenth of the table data (a tabulated site, or an even step
# between two), so a correct engine matches them to float rounding; a looser
# tolerance would hide an off-by-one bracket near a site
TOLERANCE = 1e-6
DISPLAY_DECIMALS = 1
