"""OpenPGP-style user identity parsing."""