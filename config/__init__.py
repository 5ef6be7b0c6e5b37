# config package: authoritative source for all benchmark configuration.
#
# Sub-modules:
#   target_config.py: target base URL, timeouts, user agent, reservation days
#   score_params.py : per-endpoint score weights, extra score, penalties
