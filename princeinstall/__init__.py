"""
prince-install — provision and run the PrinceXML ``prince`` executable.
"""

__version__ = "0.1.0"
