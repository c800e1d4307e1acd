"""floss_funding.core

Shared infrastructure: configuration, logging, errors, time helpers and the
namespace registry. Feature packages (activation, nagging) depend on core,
never the other way round.
"""
