from __future__ import annotations

# keccak256("Transfer(address,address,uint256)")
TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
ZERO_TOPIC = "0x" + "00" * 32


def _view(name, inputs=(), outputs=()):
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": list(inputs),
        "outputs": list(outputs),
    }


def _uint(name=""):
    return {"name": name, "type": "uint256"}


def _addr(name=""):
    return {"name": name, "type": "address"}


_ADDR_LIST = {"name": "", "type": "address[]"}

FACTORY_ABI = [
    _view("debateCount", outputs=[_uint()]),
    _view("activeCount", outputs=[_uint()]),
    _view("resolvingCount", outputs=[_uint()]),
    _view("resolvedCount", outputs=[_uint()]),
    _view("undeterminedCount", outputs=[_uint()]),
    _view("getAllDebates", outputs=[_ADDR_LIST]),
    _view("getActiveDebates", outputs=[_ADDR_LIST]),
    _view(
        "userStats",
        inputs=[_addr("user")],
        outputs=[{
            "name": "",
            "type": "tuple",
            "components": [
                _uint("totalWinnings"),
                _uint("totalBets"),
                _uint("debatesParticipated"),
                _uint("debatesWon"),
                _uint("totalClaimed"),
                {"name": "netProfit", "type": "int256"},
                _uint("winRate"),
            ],
        }],
    ),
]

_ARGUMENT_COMPONENTS = [
    _addr("author"),
    {"name": "content", "type": "string"},
    _uint("timestamp"),
    _uint("amount"),
]

DEBATE_ABI = [
    _view(
        "info",
        outputs=[{
            "name": "",
            "type": "tuple",
            "components": [
                _addr("creator"),
                {"name": "debateStatement", "type": "string"},
                {"name": "description", "type": "string"},
                {"name": "sideAName", "type": "string"},
                {"name": "sideBName", "type": "string"},
                _uint("creationDate"),
                _uint("endDate"),
                {"name": "isResolved", "type": "bool"},
                {"name": "isSideAWinner", "type": "bool"},
                _uint("totalLockedA"),
                _uint("totalUnlockedA"),
                _uint("totalLockedB"),
                _uint("totalUnlockedB"),
                {"name": "winnerReasoning", "type": "string"},
                _uint("totalContentBytes"),
                _uint("maxTotalContentBytes"),
                _uint("totalBounty"),
            ],
        }],
    ),
    _view("status", outputs=[{"name": "", "type": "uint8"}]),
    _view("argumentsSideA", outputs=[{"name": "", "type": "tuple[]", "components": _ARGUMENT_COMPONENTS}]),
    _view("argumentsSideB", outputs=[{"name": "", "type": "tuple[]", "components": _ARGUMENT_COMPONENTS}]),
]

READER_ABI = [
    _view(
        "getPlatformStats",
        outputs=[{
            "name": "",
            "type": "tuple",
            "components": [
                _uint("totalDebates"),
                _uint("activeDebates"),
                _uint("resolvingDebates"),
                _uint("resolvedDebates"),
                _uint("undeterminedDebates"),
            ],
        }],
    ),
    _view(
        "getAggregateStats",
        inputs=[_ADDR_LIST],
        outputs=[_uint("totalVolume"), _uint("totalBounties"), _uint("totalArguments"), _uint("uniqueParticipants")],
    ),
    _view(
        "getDebateBasicInfoBatch",
        inputs=[_ADDR_LIST],
        outputs=[{
            "name": "",
            "type": "tuple[]",
            "components": [
                _addr("debateAddress"),
                _addr("creator"),
                _uint("endDate"),
                {"name": "status", "type": "uint8"},
                _uint("totalSideA"),
                _uint("totalSideB"),
                _uint("totalBounty"),
                _uint("argumentCountA"),
                _uint("argumentCountB"),
            ],
        }],
    ),
    _view(
        "getParticipantDetails",
        inputs=[_ADDR_LIST, _uint("maxResults")],
        outputs=[{
            "name": "",
            "type": "tuple[]",
            "components": [_addr("participant"), _uint("totalArgumentsWritten"), _uint("totalAmountBet")],
        }],
    ),
    _view("getArgumentAuthors", inputs=[_ADDR_LIST, _uint("maxResults")], outputs=[_ADDR_LIST]),
    _view(
        "getBatchAgentStats",
        inputs=[_ADDR_LIST],
        outputs=[{
            "name": "",
            "type": "tuple[]",
            "components": [
                _addr("agent"),
                _uint("totalWinnings"),
                _uint("totalBets"),
                _uint("debatesParticipated"),
                _uint("debatesWon"),
                {"name": "netProfit", "type": "int256"},
                _uint("winRate"),
            ],
        }],
    ),
    _view("getDebateCreators", inputs=[_ADDR_LIST], outputs=[_ADDR_LIST]),
]
