"""Core domain package for jukebot.

Core contains the trigger registry, matching, dispatch, and watermark logic
without any Telegram, speaker, or storage-specific code, keeping the business
logic portable.
"""
