GENESIS_ENDPOINT = '/eth/v1/beacon/genesis'
CONFIG_SPEC_ENDPOINT = '/eth/v1/config/spec'
HEADERS_ENDPOINT = '/eth/v1/beacon/headers/{slot}'
FINALITY_CHECKPOINTS_ENDPOINT = '/eth/v1/beacon/states/{slot}/finality_checkpoints'
COMMITTEES_ENDPOINT = '/eth/v1/beacon/states/{slot}/committees'
BLOCK_ATTESTATIONS_ENDPOINT = '/eth/v1/beacon/blocks/{slot}/attestations'
