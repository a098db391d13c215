# evmcore

Building blocks for an Ethereum virtual machine: fixed-size hash types,
bytecode, account state, execution results, the transaction environment
and its validation, database interfaces, and the standard precompiled
contracts grouped by hard fork.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `evmcore.bits`: `B160` and `B256` fixed-size byte strings (`zero`, `random`,
  `from_hex`, `to_hex`, `is_zero`), with `B256.from_int` / `to_int` / `to_b160`
  and `B160.from_u64` / `to_b256`. `from_hex` raises `FromHexError` on a
  non-hex character and `ValueError` on a wrong length.
- `evmcore.utilities`: `keccak256`, `create_address`, `create2_address`,
  `hex_bytes_encode`, `hex_bytes_decode`, `KECCAK_EMPTY` and the limits
  `STACK_LIMIT`, `CALL_STACK_LIMIT`, `MAX_CODE_SIZE`, `MAX_INITCODE_SIZE`.
- `evmcore.specification`: `SpecId`, the hard forks in order, with
  `try_from_u8`, `from_name` and `enabled`.
- `evmcore.bytecode`: `Bytecode` in its `RawState`, `CheckedState` or
  `AnalysedState`, and `JumpMap`.
- `evmcore.state`: `Account`, `AccountInfo`, `StorageSlot` and the
  `AccountStatus` flags.
- `evmcore.result`: `ExecutionResult` wrapping `Success`, `Revert` or
  `Halted`; `Log`, `Eval`, `Halt`, `OutOfGasError`, `CallOutput`,
  `CreateOutput`, `ResultAndState`; the exceptions `EVMError`,
  `InvalidTransaction` (with an `InvalidTransactionKind`), `PrevrandaoNotSet`
  and `DatabaseError`.
- `evmcore.env`: `Env` made of `CfgEnv`, `BlockEnv` and `TxEnv`, with
  `effective_gas_price`, `validate_block_env`, `validate_tx` and
  `validate_tx_against_state`; `TransactTo`, `CreateScheme`, `AnalysisKind`.
- `evmcore.db`: the abstract interfaces `Database`, `DatabaseRef`,
  `DatabaseCommit`, `State` and `BlockHash`; `RefDBWrapper`, and
  `DatabaseComponents`, which wraps component failures in
  `StateComponentError` or `BlockHashComponentError`.
- `evmcore.precompile`:
  - `error`: `PrecompileError`, `PrecompileErrorKind`, `calc_linear_cost_u32`.
  - `secp256k1`: `ecrecover`, `ec_recover_run` (address 1).
  - `hashes`: `sha256_run` (2), `ripemd160_run` (3), `identity_run` (4).
  - `bn128`: `run_add`, `run_mul`, `run_pair` and the priced variants
    `add_byzantium`/`add_istanbul` (6), `mul_byzantium`/`mul_istanbul` (7),
    `pair_byzantium`/`pair_istanbul` (8).
  - `blake2`: `compress` and `run`, the BLAKE2b `F` function (9).
  - `registry`: `Precompiles` (`homestead`, `byzantium`, `istanbul`,
    `berlin`, `latest`, `new`), `Precompile`, `PrecompileOutput`,
    `PrecompileSpecId`.

## Examples

Derive a contract address:

```python
from evmcore.bits import B160
from evmcore.utilities import create_address

caller = B160.from_u64(0x1234)
print(create_address(caller, 0).to_hex())
```

Run a precompile for a given fork:

```python
from evmcore.bits import B160
from evmcore.precompile.registry import Precompiles, PrecompileSpecId

precompiles = Precompiles.new(PrecompileSpecId.BERLIN)
sha256 = precompiles.get(B160.from_u64(2))
gas_used, output = sha256(b"hello", 100)
```

Precompiles that run out of gas or get malformed input raise
`evmcore.precompile.error.PrecompileError`, whose `kind` tells which
`PrecompileErrorKind` it was. `ec_recover_run` does not raise for a bad
signature; it returns empty output.

Validate a transaction against its environment:

```python
from evmcore.env import Env
from evmcore.specification import SpecId

env = Env()
env.validate_tx(SpecId.LATEST)
```

A failed check raises `InvalidTransaction`; its `kind` says which rule
was broken.

## What it does not do

- There is no bytecode interpreter and no transaction executor: the package
  describes inputs and results but runs no contract code.
- The database classes are interfaces only; no in-memory or persistent
  database is provided.
- There is no modular exponentiation precompile (address 5). The Berlin and
  latest precompile sets therefore hold the same contracts as Istanbul.