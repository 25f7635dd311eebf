"""Ephemeral Vault Meta information.
   Ephemeral Vault shares one-shot or time-limited secrets
   without ever keeping the decryption key on the server.
"""
__title__ = 'ephemeral_vault'
__description__ = (
   'Ephemeral Vault shares one-shot or time-limited secrets '
   'without ever keeping the decryption key on the server.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/ephemeral-vault'
