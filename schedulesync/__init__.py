"""
schedulesync: client-side data layer for a remote schedule collection.
"""
