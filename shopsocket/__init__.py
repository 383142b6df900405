"""
Real-time client for the spandroidshopping application.
"""

APPLICATION_ID = "com.huankeshu.spandroidshopping"
VERSION_CODE = 1
__version__ = "1.0"

USER_AGENT = f"spandroidshopping/{__version__}"
