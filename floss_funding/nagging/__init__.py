"""floss_funding.nagging

Cross-process throttling of funding reminders via per-type YAML lockfiles.
"""
