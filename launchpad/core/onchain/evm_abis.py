"""
Launchpad token and Uniswap V2 router/factory ABIs.
"""
from typing import Any, Final, List

ZERO_ADDRESS: Final[str] = "0x0000000000000000000000000000000000000000"

LAUNCHPAD_TOKEN_ABI: Final[List[Any]] = [
    {
        "inputs": [
            {"internalType": "string", "name": "_name", "type": "string"},
            {"internalType": "string", "name": "_symbol", "type": "string"},
            {"internalType": "uint8", "name": "_decimals", "type": "uint8"},
            {"internalType": "uint256", "name": "_totalSupply", "type": "uint256"},
            {"internalType": "address", "name": "_feeCollector", "type": "address"},
            {"internalType": "uint16", "name": "_feeBasisPoints", "type": "uint16"},
        ],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    # --- View Functions ---
    {"inputs": [], "name": "name", "outputs": [{"name": "", "type": "string"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "symbol", "outputs": [{"name": "", "type": "string"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "decimals", "outputs": [{"name": "", "type": "uint8"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "totalSupply", "outputs": [{"name": "", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "account", "type": "address"}], "name": "balanceOf",
     "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}],
     "name": "allowance", "outputs": [{"name": "", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "feeCollector", "outputs": [{"name": "", "type": "address"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "feeBasisPoints", "outputs": [{"name": "", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "owner", "outputs": [{"name": "", "type": "address"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "account", "type": "address"}], "name": "isExcludedFromFee",
     "outputs": [{"name": "", "type": "bool"}], "stateMutability": "view", "type": "function"},
    # --- Write Functions ---
    {"inputs": [{"name": "spender", "type": "address"}, {"name": "value", "type": "uint256"}],
     "name": "approve", "outputs": [{"name": "", "type": "bool"}],
     "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"name": "to", "type": "address"}, {"name": "value", "type": "uint256"}],
     "name": "transfer", "outputs": [{"name": "", "type": "bool"}],
     "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"name": "account", "type": "address"}, {"name": "excluded", "type": "bool"}],
     "name": "setFeeExclusion", "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    # --- Events ---
    {"anonymous": False, "name": "Transfer", "type": "event",
     "inputs": [{"indexed": True, "name": "from", "type": "address"},
                {"indexed": True, "name": "to", "type": "address"},
                {"indexed": False, "name": "value", "type": "uint256"}]},
    {"anonymous": False, "name": "FeeCollected", "type": "event",
     "inputs": [{"indexed": True, "name": "from", "type": "address"},
                {"indexed": True, "name": "to", "type": "address"},
                {"indexed": False, "name": "amount", "type": "uint256"}]},
]

UNISWAP_V2_ROUTER_ABI: Final[List[Any]] = [
    {"inputs": [], "name": "factory", "outputs": [{"name": "", "type": "address"}],
     "stateMutability": "pure", "type": "function"},
    {"inputs": [], "name": "WETH", "outputs": [{"name": "", "type": "address"}],
     "stateMutability": "pure", "type": "function"},
    {
        "inputs": [
            {"name": "token", "type": "address"},
            {"name": "amountTokenDesired", "type": "uint256"},
            {"name": "amountTokenMin", "type": "uint256"},
            {"name": "amountETHMin", "type": "uint256"},
            {"name": "to", "type": "address"},
            {"name": "deadline", "type": "uint256"},
        ],
        "name": "addLiquidityETH",
        "outputs": [
            {"name": "amountToken", "type": "uint256"},
            {"name": "amountETH", "type": "uint256"},
            {"name": "liquidity", "type": "uint256"},
        ],
        "stateMutability": "payable",
        "type": "function",
    },
]

UNISWAP_V2_FACTORY_ABI: Final[List[Any]] = [
    {"inputs": [{"name": "tokenA", "type": "address"}, {"name": "tokenB", "type": "address"}],
     "name": "getPair", "outputs": [{"name": "pair", "type": "address"}],
     "stateMutability": "view", "type": "function"},
]
