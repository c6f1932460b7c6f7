"""Record Vault Meta information.
   Record Vault stores string records on a key-addressed ledger,
   optionally encrypted with a per-call AES-256 key.
"""
__title__ = 'record_vault'
__description__ = (
   'Record Vault stores string records on a key-addressed ledger, '
   'optionally encrypted with a per-call AES-256 key.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
