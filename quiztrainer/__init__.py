"""
Interactive command-line quiz trainer.
"""
