"""pxfm HTTP backend"""
