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
'''MechAFM - Mechanical model of an AFM probe

   The ``mechafm`` package contains the force-field machinery that is used to
   relax a probe particle above a sample surface: the interaction kernels,
   the precomputed force grids and the spectral builder for the electrostatic
   force grid (:mod:`mechafm.pes`). The scan loop, the minimizer and all file
   formats live outside this package and only talk to it through position,
   force and energy arrays.
'''


__version__ = '1.0'

from mechafm.log import *
from mechafm.pes import *
