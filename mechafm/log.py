# -*- coding: utf-8 -*-
# MechAFM is a mechanical model of an atomic-force-microscope probe
# Copyright (C) 2014 - 2015 The MechAFM developers, all rights reserved unless
# otherwise stated.
#
# This file is part of MechAFM.
#
# MechAFM is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; either version 3
# of the License, or (at your option) any later version.
#
# MechAFM is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, see <http://www.gnu.org/licenses/>
#
#--
"""Screen logger

   This module holds the main screen logging object of MechAFM. The ``log``
   object is an instance of the ``ScreenLog`` class in the module
   ``molmod.log``. The logger also comes with a timer infrastructure, which
   is implemented in the same ``molmod.log`` module. Its report is printed
   in the footer.
"""


import atexit

from molmod.log import ScreenLog, TimerGroup

import mechafm


__all__ = ['log', 'timer']


head_banner = r"""
================================================================================

            Welcome to MechAFM {} - Mechanical AFM probe model

     Relaxation of a probe particle above a model surface, following the
     probe-particle model of Hapala et al., Phys. Rev. B 90, 085421 (2014).
""".format(mechafm.__version__)


foot_banner = r"""
________________________________________________________________________________

        End of file. Thanks for using MechAFM! Come back soon!!
________________________________________________________________________________
"""

timer = TimerGroup()
log = ScreenLog('MECHAFM', mechafm.__version__, head_banner, foot_banner, timer)
atexit.register(log.print_footer)
