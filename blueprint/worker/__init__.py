"""
Item event worker
"""
