"""floss_funding.activation

Token classification (env name derivation, decryption, word window) and the
load-time poke flow.
"""
