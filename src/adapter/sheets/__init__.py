"""Spreadsheet storage engine: transport, retries, schema, codecs and tables"""
