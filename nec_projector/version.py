# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Version of the nec_projector package"""

__version__ = "0.1.0"
