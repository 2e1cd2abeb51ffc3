from wallet_score.db.repositories.scores import WalletScoreRepository

__all__ = ["WalletScoreRepository"]
