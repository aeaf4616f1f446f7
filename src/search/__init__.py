"""Transaction search query interpretation.

The search layer turns a free-text query (words, quoted phrases and `field:value` modifiers) into a
strict `TransactionFilter`, which is then used to build deterministic, parameterized SQL.
"""
