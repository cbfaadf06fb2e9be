'''
display.py
Page geometry of the tablet display that ink is recorded on.

rmrender draws reMarkable notebooks as images and PDF documents.
Copyright (C) 2020-23  Davis Remmel

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as
published by the Free Software Foundation, either version 3 of the
License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''


class DisplayRM:
    # The tablet's screen; every page is drawn at this resolution.
    dpi = 226
    portrait_size = (1404, 1872)
