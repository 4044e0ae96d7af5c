#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Logging for nec_projector package.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__.rsplit('.', 1)[0])
