"""Stack interface, Treiber stack and elimination-backoff stack."""