"""Quick roster import toolkit.

Turns operative, job and client spreadsheets into validated records and
exchanges roster requests with the external assignment service.
"""

__version__ = "0.1.0"
